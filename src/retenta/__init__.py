"""retenta: spaced-repetition scheduling for vocabulary learning."""

from retenta.consts import VERSION

__version__ = VERSION
