from aiplayground.models.common import CamelModel


class SpeechSegment(CamelModel):
    text: str = ""
    # Times and durations may come back as prose ("about 4 seconds").
    start_time: float | str = 0
    end_time: float | str = 0


class Speaker(CamelModel):
    id: str = ""
    label: str = ""
    segments: list[SpeechSegment] = []


class ConversationAnalysis(CamelModel):
    transcript: str = ""
    speakers: list[Speaker] = []
    summary: str = ""
    key_topics: list[str] = []
    sentiment: str = "Neutral"
    duration: float | str = 0


class AnalyzeConversationRequest(CamelModel):
    audio_data: str | None = None
    mime_type: str = "audio/mpeg"
    file_name: str | None = None
