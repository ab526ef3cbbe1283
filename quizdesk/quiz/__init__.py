"""
Quiz Module - làm bài trắc nghiệm và chấm điểm tự động

Chức năng:
- User đã đăng nhập làm bài 1 lần, nhận điểm + feedback từng câu
- Chỉ lần nộp đầu tiên được lưu và cộng XP, các lần sau chỉ chấm lại
- Admin quản lý đề và câu hỏi (single_choice / multiple_choice)
"""

# ==================== BLUEPRINTS ====================

# Blueprint cho user (cần đăng nhập)
from quizdesk.quiz.routes import quiz_bp

# Blueprint cho admin
from quizdesk.quiz.admin_routes import quiz_admin_bp

__all__ = ['quiz_bp', 'quiz_admin_bp']
