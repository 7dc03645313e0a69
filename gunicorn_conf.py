import multiprocessing
import os

# Gunicorn Configuration File

# Bind to all interfaces, port from the environment when running on a PaaS
bind = f"0.0.0.0:{os.environ.get('PORT', '8080')}"

# Worker Options
# Queries are I/O bound, async workers scale with cores.
workers = int(os.environ.get("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"

# Timeout
# BigQuery scans can take a while on large tables
timeout = 120
keepalive = 5

# Logging
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"  # stdout
errorlog = "-"   # stderr

# Process Naming
proc_name = "beacon_api"

# Daemon
daemon = False
