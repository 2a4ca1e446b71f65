# Public endpoint: all three stages, no interception.


def middleware(request, response):
    log.info("[/]: MIDDLEWARE - Request received.")
    response.headers["X-Request-Path"] = request.path


def handler(request, response):
    log.info("[/]: HANDLER - Processing request.")
    response.status = 200
    response.headers["Content-Type"] = "application/json"
    response.body = json.dumps(
        {
            "endpoint": "/",
            "method": request.method,
            "message": "Public access granted. Welcome to the modular router!",
        }
    )


def response_hook(request, response):
    log.info("[/]: RESPONSE HOOK - Adding final header.")
    response.headers["X-Response-ID"] = "ABC-123"
