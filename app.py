import os
import logging
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

# Configure basic logging (enhanced by setup_logging below)
logging.basicConfig(level=logging.INFO)

# Load credentials from JSON file instead of .env
try:
    from credentials_loader import load_credentials
    credentials = load_credentials()
    logging.info("✅ Credentials loaded from JSON file or environment variables")
except Exception as e:
    logging.warning(f"⚠️ Could not load credentials: {e}")
    logging.info("Using system environment variables as fallback")

# Create Flask app
app = Flask(__name__)
# Batch results are returned in LPN input order
app.json.sort_keys = False

# Rotating log files; disabled with LPN_LOCK_FILE_LOGGING=false
if os.environ.get('LPN_LOCK_FILE_LOGGING', 'true').lower() != 'false':
    try:
        from logging_config import setup_logging
        log_directory = setup_logging(app)
        logging.info(f"✅ Comprehensive logging configured. Logs directory: {log_directory}")
    except Exception as e:
        logging.warning(f"⚠️ Could not setup comprehensive logging: {e}. Using basic logging only.")

app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

# Manhattan WMS configuration; missing secrets only make 'auth' fail
app.config['MANHATTAN_AUTH_HOST'] = os.environ.get('MANHATTAN_AUTH_HOST', 'salep-auth.sce.manh.com')
app.config['MANHATTAN_API_HOST'] = os.environ.get('MANHATTAN_API_HOST', 'salep.sce.manh.com')
app.config['MANHATTAN_CLIENT_ID'] = os.environ.get('MANHATTAN_CLIENT_ID', 'omnicomponent.1.0.0')
app.config['MANHATTAN_USERNAME_BASE'] = os.environ.get('MANHATTAN_USERNAME_BASE', 'sdtadmin@')

missing = [key for key in ('MANHATTAN_SECRET', 'MANHATTAN_PASSWORD') if not os.environ.get(key)]
if missing:
    logging.warning(f"⚠️ Manhattan credentials missing: {', '.join(missing)}. Authentication will fail until they are set.")


@app.after_request
def add_cors_headers(response):
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
    return response


# Import and register blueprints
from modules.main_controller import register_modules
register_modules(app)

logging.info("✅ All module blueprints registered")


if __name__ == '__main__':
    # for development only
    app.run(host="0.0.0.0", port=int(os.environ.get('PORT', 5000)), debug=True)
