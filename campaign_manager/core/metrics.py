from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter("http_requests_total", "Total HTTP requests", ["method", "path", "status"])
REQUEST_LATENCY = Histogram("http_request_duration_seconds", "Request latency", ["path"])
CACHE_LOOKUPS = Counter("campaign_cache_lookups_total", "Campaign cache lookups", ["kind", "result"])
