"""Starter .rulesync.toml template."""

DEFAULT_TOML = """\
# rulesync configuration
version = "1.0"

[source]
kind = "redis"                       # redis | file | http
redis_url = "redis://localhost:6379/0"
key = "CUSTOM_EXPRESS_STRATEGY"
name_field = "alarm_name"
expr_field = "expre"
# interval_field = "step"
# path = "rules.json"                # file source
# url = "http://rules.internal/api"  # http source

[rules]
file_name = "rules.yml"
group_name = "rulesync"
group_by_interval = true

# [rules.default_labels]
# team = "ops"

[reload]
kind = "http"                        # http | signal | none
url = "http://127.0.0.1:9090/-/reload"
method = "POST"
timeout = 3.0
# pid_file = "/var/run/prometheus.pid"

[schedule]
interval = 60                        # seconds

[logging]
level = "info"                       # debug | info | warning | error
json = false
"""
