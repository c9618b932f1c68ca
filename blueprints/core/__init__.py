from flask import Blueprint

bp = Blueprint("core", __name__)
# importing routes registers the handlers on bp
from . import routes  # noqa: E402,F401
