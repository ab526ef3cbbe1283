from functools import wraps
from flask import jsonify
from flask_login import current_user


def admin_required(f):
    """Chỉ admin được soạn đề/câu hỏi"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'success': False, 'error': 'Authentication required'}), 401
        if not current_user.is_admin:
            return jsonify({'success': False, 'error': 'Admin permission required'}), 403
        return f(*args, **kwargs)

    return decorated_function
