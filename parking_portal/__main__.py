"""For running the parking portal"""
import os
import dotenv

if __name__ == "__main__":
    # .env must be loaded before the app reads its FLASK_ prefixed config
    dotenv.load_dotenv()
    from parking_portal.app import app
    app.run(host=os.getenv('PORTAL_HOST', '127.0.0.1'), port=int(os.getenv('PORTAL_PORT', '5000')),
            debug=os.getenv('FLASK_DEBUG') == '1')
