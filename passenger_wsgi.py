# passenger_wsgi.py
import os
import sys

# Application root (same folder as this file) – works on any cPanel path
APP_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, APP_ROOT)

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'edu_server.settings')

from edu_server.wsgi import application  # noqa: E402

# WhiteNoise serves /static/ from staticfiles/ (admin assets)
from whitenoise import WhiteNoise  # noqa: E402
application = WhiteNoise(
    application,
    root=os.path.join(APP_ROOT, 'staticfiles'),
    prefix='/static/'
)
