from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# startTime / endTime are passed through to ffmpeg untouched
TimeValue = Union[int, float, str]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClipRequest(_CamelModel):
    input_url: Optional[str] = None
    start_time: Optional[TimeValue] = None
    end_time: Optional[TimeValue] = None
    file_name: Optional[str] = None

    def missing_fields(self) -> List[str]:
        missing = []
        if not self.input_url:
            missing.append("inputUrl")
        if self.start_time is None or self.start_time == "":
            missing.append("startTime")
        if self.end_time is None or self.end_time == "":
            missing.append("endTime")
        if not self.file_name:
            missing.append("fileName")
        return missing


class AudioRequest(_CamelModel):
    input_url: Optional[str] = None
    file_name: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [] if self.input_url else ["inputUrl"]


class ClipResponse(_CamelModel):
    clipped_url: str


class AudioResponse(_CamelModel):
    audio_url: str
