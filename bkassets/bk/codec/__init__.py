from .abstract import AbstractCodec
from .bkzip import BKZipCodec
