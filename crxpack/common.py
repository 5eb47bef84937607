# Common type definitions
from pathlib import Path
from typing import Annotated, Union

from pydantic import Field

from .constants import ZipConstants


PathLike = Union[str, Path]

# Width-bounded integers for ZIP record fields. Values outside the range fail
# pydantic validation when a record is constructed.
UInt16 = Annotated[int, Field(ge=0, le=ZipConstants.UINT16_MAX)]
UInt32 = Annotated[int, Field(ge=0, le=ZipConstants.UINT32_MAX)]
