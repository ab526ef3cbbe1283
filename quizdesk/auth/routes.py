from flask import jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from quizdesk.auth import auth_bp
from quizdesk.forms import LoginForm
from quizdesk.models import User


# ==================== ĐĂNG NHẬP ====================
@auth_bp.route('/login', methods=['POST'])
def login():
    """Đăng nhập bằng email + mật khẩu (form hoặc JSON)"""
    if current_user.is_authenticated:
        return jsonify({'success': True, 'user_id': current_user.id})

    form = LoginForm(meta={'csrf': False})
    if not form.validate_on_submit():
        return jsonify({'success': False, 'error': 'Invalid login data', 'errors': form.errors}), 400

    user = User.query.filter_by(email=form.email.data).first()
    if user is None or not user.is_active or not user.check_password(form.password.data):
        current_app.logger.warning(f"⚠️ Failed login for {form.email.data}")
        return jsonify({'success': False, 'error': 'Invalid email or password'}), 401

    login_user(user, remember=form.remember_me.data)
    current_app.logger.info(f"✅ User {user.id} logged in")
    return jsonify({'success': True, 'user_id': user.id})


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Đăng xuất"""
    logout_user()
    return jsonify({'success': True})
