"""Image analysis: description, objects, OCR text and tags for an uploaded picture."""

from aiplayground.exceptions import InvalidRequestError
from aiplayground.models.image import ImageAnalysis, PeopleInfo, TechnicalDetails
from aiplayground.services import gemini

PROMPT = """
Analyze this image in detail and provide a comprehensive analysis. Please return your response in the following JSON format:

{
  "description": "A clear, concise description of what you see in the image",
  "detailedDescription": "A more detailed and nuanced description of the image, including context, emotions, and artistic elements",
  "objects": ["object1", "object2", "object3"],
  "colors": ["color1", "color2", "color3"],
  "mood": "The overall mood or atmosphere of the image",
  "style": "The artistic style, photography style, or visual style",
  "people": {
    "count": 0,
    "details": ["Description of each person if any are present"]
  },
  "location": "Likely location or setting type",
  "timeOfDay": "Time of day if discernible",
  "textContent": "Any text visible in the image (OCR)",
  "technicalDetails": {
    "composition": "Description of the composition and framing",
    "lighting": "Description of lighting conditions and quality",
    "quality": "Assessment of image quality, resolution, clarity"
  },
  "tags": ["tag1", "tag2", "tag3", "tag4", "tag5"]
}

Instructions:
1. Provide a brief but informative description (1-2 sentences)
2. Give a detailed description that captures the essence, mood, and artistic qualities
3. List all significant objects you can identify in the image
4. Identify the main colors present in the image
5. Determine the overall mood/atmosphere (e.g., peaceful, energetic, melancholic, etc.)
6. Identify the style (e.g., portrait, landscape, street photography, digital art, etc.)
7. Count people and describe them if present
8. Identify the likely location or setting
9. Determine time of day if possible from lighting/context
10. Extract any visible text using OCR capabilities
11. Analyze technical aspects like composition, lighting, and quality
12. Provide 5-7 relevant tags for categorization

Please ensure the JSON is valid and properly formatted. Be descriptive but concise.
"""


def fallback_analysis(text: str) -> ImageAnalysis:
    return ImageAnalysis(
        description=text[:200] + "...",
        detailed_description=text,
        objects=["Unknown"],
        colors=["Mixed"],
        mood="Neutral",
        style="Photography",
        people=PeopleInfo(count=0, details=[]),
        location="Unknown",
        time_of_day="Unknown",
        text_content="",
        technical_details=TechnicalDetails(
            composition="Standard composition",
            lighting="Natural lighting",
            quality="Good quality",
        ),
        tags=["general", "image", "analysis"],
    )


def analyze_image(image_data: str | None, mime_type: str) -> ImageAnalysis:
    if not image_data:
        raise InvalidRequestError("No image data provided")
    client = gemini.get_client()
    media = gemini.decode_media(image_data, mime_type)
    text = gemini.generate(PROMPT, media, client=client)
    return gemini.parse_result(text, ImageAnalysis, lambda: fallback_analysis(text))
