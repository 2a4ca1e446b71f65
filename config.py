# Route configuration for scriptgate.
# A positional address on the command line overrides SERVER_ADDR.
SERVER_ADDR = "localhost:9000"

# router.add(path, script): exact request path -> file under SCRIPTS_DIR

# Public endpoint demo
router.add("/", "default_api.py")

# Protected endpoint demo
router.add("/api/users", "user_api.py")
