import os
import sys

# Add the current directory to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Add the src directory to the Python path
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from citation_manager.config import Config
from citation_manager.utils.logging_setup import setup_logging

setup_logging(Config.LOG_DIR, Config.LOG_LEVEL)

# Now import and build the app
from ui.app import create_app

application = create_app()

if __name__ == "__main__":
    application.run(debug=True)
