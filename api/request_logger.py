"""Per-request id and access log line."""
import logging
import time
import uuid

from flask import g, request

logger = logging.getLogger(__name__)


def init_request_logging(app):
    @app.before_request
    def _start_request():
        g.request_id = uuid.uuid4().hex
        g.request_started = time.perf_counter()
        logger.debug("[%s] %s %s - %s", g.request_id, request.method, request.path, request.remote_addr)

    @app.after_request
    def _finish_request(response):
        request_id = g.get("request_id")
        if request_id:
            duration_ms = (time.perf_counter() - g.request_started) * 1000
            logger.info("[%s] %s %s %s - %.1fms", request_id, request.method, request.path,
                        response.status_code, duration_ms)
            response.headers["X-Request-ID"] = request_id
        return response
