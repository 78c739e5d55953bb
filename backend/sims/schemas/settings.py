"""
Pricing Settings Pydantic Schemas
"""
from typing import Dict, Union

from pydantic import RootModel, StrictFloat, StrictInt, StrictStr

# Numeric settings travel as numbers, company names as text
SettingValue = Union[float, str]

# Strict so booleans and other JSON types reach the settings service unconverted
SettingInput = Union[StrictInt, StrictFloat, StrictStr, bool, None]


class SettingsPayload(RootModel[Dict[str, SettingInput]]):
    """Settings to change, key -> value; validated by the settings service"""
    pass


class SettingsResponse(RootModel[Dict[str, SettingValue]]):
    pass
