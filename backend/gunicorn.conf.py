import os

# App
wsgi_app = "videotube:create_app()"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = 1
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by the container runtime)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Uploads go through the app; proxy headers are handled by ProxyFix
forwarded_allow_ips = "*"
proxy_protocol = False
limit_request_field_size = 16384
