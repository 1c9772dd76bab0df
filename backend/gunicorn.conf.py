import os

from blogapi.core.logger import shutdown_logging

wsgi_app = "blogapi:create_app()"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8080")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = 1
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Honour proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False


def worker_exit(server, worker):
    shutdown_logging()
