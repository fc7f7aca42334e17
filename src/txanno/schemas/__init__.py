import collections.abc
import os
from typing import Dict, Optional

from snakemake.utils import validate as snakemake_validate

from ..constants import SUBCOMMAND

CONFIG_SCHEMA = os.path.join(os.path.dirname(__file__), 'config.json')


class ImmutableDict(collections.abc.Mapping):
    def __init__(self, data):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)


def get_by_prefix(config, prefix):
    return {k.replace(prefix, ''): v for k, v in config.items() if k.startswith(prefix)}


def validate_config(config: Dict, stage: Optional[str] = None) -> Dict:
    """
    check the config against the schema and fill in any missing defaults (in place)

    Raises:
        AssertionError: the config is not valid for the given stage
    """
    try:
        snakemake_validate(config, CONFIG_SCHEMA, set_default=True)
    except Exception as err:
        short_msg = '. '.join(
            [line for line in str(err).split('\n') if line.strip()][:3]
        )  # these can get super long
        raise AssertionError(short_msg)

    if stage == SUBCOMMAND.ANNOTATE and not config['reference.transcripts']:
        raise AssertionError('missing required config: reference.transcripts')
    return config


DEFAULTS = {}
snakemake_validate(
    DEFAULTS,
    CONFIG_SCHEMA,
    set_default=True,
)
DEFAULTS = ImmutableDict(DEFAULTS)
