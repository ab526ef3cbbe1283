"""
Reward Notifier - cộng điểm kinh nghiệm khi user hoàn thành quiz lần đầu

Gọi SAU khi bài làm đã commit. Fire-and-forget: lỗi chỉ được log, không ảnh hưởng kết quả chấm.
"""

import logging
import requests
from quizdesk import db
from quizdesk.models import User

logger = logging.getLogger(__name__)


class RewardNotifier:
    """Interface - platform bên ngoài implement award_experience"""

    def award_experience(self, user_id, amount):
        raise NotImplementedError


class UserExperienceNotifier(RewardNotifier):
    """Mặc định: cộng thẳng vào User.experience_points"""

    def award_experience(self, user_id, amount):
        # Cộng trong 1 câu UPDATE để 2 quiz hoàn thành cùng lúc không ghi đè nhau
        try:
            updated = User.query.filter_by(id=user_id).update(
                {User.experience_points: User.experience_points + amount},
                synchronize_session=False
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        if not updated:
            logger.warning(f'⚠️ Reward skipped, user {user_id} not found')
            return False

        logger.info(f'✅ Awarded {amount} XP to user {user_id}')
        return True


class WebhookRewardNotifier(RewardNotifier):
    """Gửi reward sang platform ngoài qua webhook"""

    def __init__(self, url, timeout=5):
        self.url = url
        self.timeout = timeout

    def award_experience(self, user_id, amount):
        response = requests.post(self.url, json={
            'user_id': user_id,
            'amount': amount,
            'reason': 'quiz_completed'
        }, timeout=self.timeout)
        response.raise_for_status()
        logger.info(f'✅ Reward webhook accepted {amount} XP for user {user_id}')
        return True


def build_notifier(config):
    """Chọn notifier theo config: có REWARD_WEBHOOK_URL thì dùng webhook"""
    url = config.get('REWARD_WEBHOOK_URL')
    if url:
        return WebhookRewardNotifier(url, timeout=config.get('REWARD_WEBHOOK_TIMEOUT', 5))
    return UserExperienceNotifier()
