from flask import Blueprint

# url_prefix задаётся в app.register_blueprint(..., url_prefix="/api/v1")
bp = Blueprint("directory", __name__)
from . import routes  # noqa
