from aiplayground.models.common import CamelModel


class PeopleInfo(CamelModel):
    count: int | str = 0
    details: list[str | dict] = []


class TechnicalDetails(CamelModel):
    composition: str = ""
    lighting: str = ""
    quality: str = ""


class ImageAnalysis(CamelModel):
    description: str = ""
    detailed_description: str = ""
    objects: list[str] = []
    colors: list[str] = []
    mood: str = ""
    style: str = ""
    people: PeopleInfo = PeopleInfo()
    location: str = ""
    time_of_day: str = ""
    text_content: str = ""
    technical_details: TechnicalDetails = TechnicalDetails()
    tags: list[str] = []


class AnalyzeImageRequest(CamelModel):
    image_data: str | None = None
    mime_type: str = "image/jpeg"
    file_name: str | None = None
