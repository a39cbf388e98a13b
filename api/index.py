from mangum import Mangum
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from points.api import create_app
from points.config import ApplicationConfig, configure_logging

configure_logging(ApplicationConfig.LOG_LEVEL)

app = create_app(ApplicationConfig)

handler = Mangum(app)
