bind = "127.0.0.1:3000"
# The real-time connection registry lives in process memory; a second worker
# would not see the first one's rooms.
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
timeout = 60
graceful_timeout = 30
keepalive = 5
loglevel = "info"
accesslog = "-"
errorlog = "-"
