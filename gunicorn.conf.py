# gunicorn.conf.py
import os

bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '8080')}"
wsgi_app = "athlete_intake.main:app"
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.getenv("WEB_CONCURRENCY", "2"))

# part bytes go straight to storage; requests are bounded by the email timeout
timeout = int(os.getenv("EMAIL_TIMEOUT_SEC", "15")) + 30
graceful_timeout = 20
keepalive = 5
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")

accesslog = "-" if os.getenv("ACCESS_LOG", "true").lower() == "true" else None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
