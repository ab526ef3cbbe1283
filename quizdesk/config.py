import os
from dotenv import load_dotenv

# Load biến môi trường từ file .env
load_dotenv()


def _database_url():
    """Lấy DATABASE_URL, mặc định SQLite cạnh package"""
    url = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(os.path.abspath(os.path.dirname(__file__)), '../quizdesk.db')

    # Fix lỗi với Heroku/Render PostgreSQL URL
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    """Cấu hình mặc định"""

    # ==================== CƠ BẢN ====================
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # ==================== DATABASE ====================
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Connection pool chỉ áp dụng cho PostgreSQL (SQLite không nhận pool_size)
    if SQLALCHEMY_DATABASE_URI.startswith('postgresql://'):
        SQLALCHEMY_ENGINE_OPTIONS = {
            'pool_size': 3,
            'pool_recycle': 300,  # Recycle connection sau 5 phút
            'pool_pre_ping': True,
            'max_overflow': 1,
            'pool_timeout': 10,
            'connect_args': {
                'connect_timeout': 10,
                'options': '-c statement_timeout=30000'  # Query timeout 30s
            }
        }
    else:
        SQLALCHEMY_ENGINE_OPTIONS = {}

    # ==================== QUIZ ====================
    QUIZ_REWARD_XP = 200  # Điểm kinh nghiệm cho lần nộp bài đầu tiên

    # Nếu có URL thì gửi reward sang platform ngoài, không thì cộng thẳng vào User
    REWARD_WEBHOOK_URL = os.environ.get('REWARD_WEBHOOK_URL')
    REWARD_WEBHOOK_TIMEOUT = 5

    APP_TIMEZONE = os.environ.get('APP_TIMEZONE') or 'UTC'

    # ==================== CSRF / NONCE ====================
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600  # Nonce nộp bài sống 1 giờ

    # ==================== FLASK-COMPRESS ====================
    COMPRESS_MIMETYPES = ['application/json']
    COMPRESS_LEVEL = 6
    COMPRESS_MIN_SIZE = 500  # Chỉ nén response > 500 bytes

    LOG_DIR = 'logs'

    @staticmethod
    def init_app(app):
        """Khởi tạo logging cho app"""
        import logging
        from logging.handlers import RotatingFileHandler

        if not app.debug and not app.testing:
            log_dir = app.config.get('LOG_DIR', 'logs')
            if not os.path.exists(log_dir):
                os.mkdir(log_dir)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, 'quizdesk.log'),
                maxBytes=1024 * 1024,  # 1MB
                backupCount=3
            )
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
            ))
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)
            app.logger.setLevel(logging.INFO)
            app.logger.info('Quizdesk startup')


class DevelopmentConfig(Config):
    """Cấu hình cho môi trường development"""
    DEBUG = True
    SQLALCHEMY_ECHO = True  # Log tất cả SQL queries


class ProductionConfig(Config):
    """Cấu hình cho production"""
    DEBUG = False
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Cấu hình cho pytest"""
    TESTING = True
    SECRET_KEY = 'testing-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    REWARD_WEBHOOK_URL = None


# Chọn config dựa trên environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}
