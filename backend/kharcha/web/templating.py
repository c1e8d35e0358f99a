"""Jinja2 environment shared by all HTML pages"""
from fastapi.templating import Jinja2Templates

from kharcha.core.config import settings
from kharcha.utils.classnames import cn
from kharcha.utils.currency import format_amount

templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))
templates.env.globals["cn"] = cn
templates.env.globals["app_name"] = settings.APP_NAME
templates.env.filters["money"] = format_amount
