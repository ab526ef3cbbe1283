"""
Gunicorn configuration file
Đặt file này cùng cấp với run.py:  gunicorn -c gunicorn.conf.py run:app
"""

import os

# ==================== WORKER CONFIGURATION ====================
# Nhiều worker vẫn an toàn khi nộp bài trùng: unique constraint ở DB chặn ghi 2 lần
workers = int(os.environ.get('WEB_CONCURRENCY', 2))

# Threads per worker - request nộp trùng trong cùng worker được khóa theo (quiz, user)
threads = 2

worker_class = 'gthread'

# ==================== TIMEOUT ====================
timeout = 30  # Chấm bài là request ngắn
graceful_timeout = 30
keepalive = 5

# ==================== MEMORY MANAGEMENT ====================
max_requests = 1000
max_requests_jitter = 50

# ==================== BINDING ====================
bind = f"0.0.0.0:{os.environ.get('PORT', '10000')}"

# ==================== LOGGING ====================
accesslog = '-'  # Log to stdout
errorlog = '-'   # Log to stderr
loglevel = 'info'

backlog = 2048


# ==================== HOOKS ====================
def on_starting(server):
    """Chạy khi Gunicorn khởi động"""
    server.log.info(f"🚀 Starting quizdesk with {workers} workers x {threads} threads, timeout {timeout}s")


def post_fork(server, worker):
    server.log.info(f"✅ [Worker {worker.pid}] Spawned")


def worker_abort(worker):
    worker.log.warning(f"❌ [Worker {worker.pid}] Aborted")


def worker_exit(server, worker):
    server.log.info(f"👋 [Worker {worker.pid}] Exited")
