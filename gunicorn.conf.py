import os

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', '10000')}"
backlog = 2048

wsgi_app = 'elevator_access_project.wsgi:application'

# Worker processes
workers = int(os.environ.get('GUNICORN_WORKERS', '2'))
worker_class = 'sync'
worker_connections = 1000
timeout = 120
keepalive = 65

# Restart workers after this many requests, to help prevent memory leaks
max_requests = 1000
max_requests_jitter = 100

# Logging
accesslog = '-'
errorlog = '-'
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'elevator_access_gunicorn'

# Server mechanics
daemon = False
pidfile = None
user = None
group = None

# SSL is handled by the reverse proxy, not gunicorn
keyfile = None
certfile = None


def worker_exit(server, worker):
    # Cierra las conexiones (y el pool) del worker antes de salir
    from django.db import connections
    for connection in connections.all(initialized_only=True):
        connection.close()
        if hasattr(connection, 'close_pool'):
            connection.close_pool()
    server.log.info("Worker exiting, database connections closed (pid: %s)", worker.pid)
