from aliasnav.utils.config import app_env, app_name, app_prefix, load_config
from aliasnav.utils.helpers import utc_now, require_environment
from aliasnav.utils.identifiers import generate_id
from aliasnav.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'utc_now',
    'require_environment',
    'generate_id',
    'initialize_logging',
]
