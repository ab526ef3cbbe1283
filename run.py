import os
from quizdesk import create_app
from quizdesk.config import config

app = create_app(config[os.environ.get('FLASK_ENV') or 'default'])

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
