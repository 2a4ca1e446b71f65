# Protected endpoint: middleware rejects requests without the bearer token,
# which skips the handler entirely.

EXPECTED_AUTH = "Bearer secret-token"


def middleware(request, response):
    log.info("[/api/users]: MIDDLEWARE - Checking Authorization.")
    if request.headers.get("Authorization") != EXPECTED_AUTH:
        log.warn("[/api/users]: Auth FAILED (401)")
        response.status = 401
        response.headers["Content-Type"] = "application/json"
        response.body = json.dumps({"error": "Unauthorized"})
    else:
        log.info("[/api/users]: Auth SUCCESS.")


def handler(request, response):
    log.info("[/api/users]: HANDLER - Authorized data access.")
    response.status = 200
    response.headers["Content-Type"] = "application/json"
    response.body = json.dumps(
        {
            "user_data": "Sensitive content only for token holders.",
            "method": request.method,
        }
    )


def response_hook(request, response):
    log.info("[/api/users]: RESPONSE HOOK - Final status: %s", response.status)
