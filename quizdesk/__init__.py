from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_compress import Compress
from flask_wtf.csrf import CSRFProtect
from quizdesk.config import Config
from dotenv import load_dotenv
import click

# Khởi tạo extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
compress = Compress()
csrf = CSRFProtect()


def create_app(config_class=Config):
    """Factory function để tạo Flask app"""
    app = Flask(__name__)
    load_dotenv()

    # ==================== CONFIG ====================
    app.config.from_object(config_class)

    # ==================== INIT EXTENSIONS ====================
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    compress.init_app(app)
    csrf.init_app(app)

    # ==================== FLASK-LOGIN ====================
    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'error': 'Authentication required'}), 401

    # ==================== REGISTER BLUEPRINTS ====================
    from quizdesk.auth import auth_bp
    from quizdesk.quiz import quiz_bp, quiz_admin_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(quiz_bp, url_prefix='/quiz')
    app.register_blueprint(quiz_admin_bp, url_prefix='/admin/quizzes')

    # API JSON tự kiểm tra nonce trong route nộp bài, bỏ CSRF toàn cục cho các blueprint này
    csrf.exempt(auth_bp)
    csrf.exempt(quiz_bp)

    # ==================== GRADING ENGINE ====================
    from quizdesk.quiz.grading import init_grading
    init_grading(app)

    # Khởi tạo cấu hình logging, v.v.
    config_class.init_app(app)

    # ==================== CLI ====================
    @app.cli.command('init-db')
    def init_db_command():
        """Tạo toàn bộ bảng (dùng khi chưa chạy migration)"""
        db.create_all()
        click.echo('Initialized the database.')

    # ==================== ERROR HANDLERS ====================
    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'success': False, 'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

    # ==================== AFTER/TEARDOWN ====================
    @app.after_request
    def after_request(response):
        """Thêm security headers cơ bản"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        if request.path.startswith('/quiz/'):
            response.cache_control.no_store = True
        return response

    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Đảm bảo đóng session sau mỗi request"""
        db.session.remove()

    return app
