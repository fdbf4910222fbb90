# run.py
import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(dotenv_path=os.path.join(basedir, '.env'))

from dogbook import create_app

app = create_app()

if __name__ == '__main__':
    host = os.getenv('FLASK_RUN_HOST', '127.0.0.1')
    port = int(os.getenv('PORT', os.getenv('FLASK_RUN_PORT', 5000)))
    debug = app.config.get('DEBUG', False)
    app.run(host=host, port=port, debug=debug)
