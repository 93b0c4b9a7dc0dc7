"""Conversation analysis: transcript, speaker turns and summary for an uploaded audio clip."""

from aiplayground.exceptions import InvalidRequestError
from aiplayground.models.conversation import ConversationAnalysis, Speaker, SpeechSegment
from aiplayground.services import gemini

PROMPT = """
Analyze this audio file and provide a comprehensive conversation analysis. Please return your response in the following JSON format:

{
  "transcript": "Full transcript of the conversation",
  "speakers": [
    {
      "id": "speaker_1",
      "label": "Speaker 1",
      "segments": [
        {
          "text": "What the speaker said",
          "startTime": 0,
          "endTime": 5
        }
      ]
    }
  ],
  "summary": "Brief summary of the conversation",
  "keyTopics": ["topic1", "topic2", "topic3"],
  "sentiment": "Positive/Negative/Neutral",
  "duration": 120
}

Instructions:
1. Transcribe the entire audio accurately
2. Identify up to 2 speakers and separate their speech segments
3. Assign approximate timestamps for each segment (in seconds)
4. Provide a concise summary of the main discussion points
5. Extract 3-5 key topics discussed
6. Determine the overall sentiment of the conversation
7. Estimate the total duration of the audio

Please ensure the JSON is valid and properly formatted. If there's only one speaker, still format as an array with one speaker object.
"""


def fallback_analysis(text: str) -> ConversationAnalysis:
    return ConversationAnalysis(
        transcript=text,
        speakers=[
            Speaker(
                id="speaker_1",
                label="Speaker 1",
                segments=[SpeechSegment(text=text, start_time=0, end_time=60)],
            )
        ],
        summary="Audio analysis completed. Please check the transcript for details.",
        key_topics=["General discussion"],
        sentiment="Neutral",
        duration=60,
    )


def analyze_conversation(audio_data: str | None, mime_type: str) -> ConversationAnalysis:
    """Transcribe and analyze base64 audio."""
    if not audio_data:
        raise InvalidRequestError("No audio data provided")
    client = gemini.get_client()
    media = gemini.decode_media(audio_data, mime_type)
    text = gemini.generate(PROMPT, media, client=client)
    return gemini.parse_result(text, ConversationAnalysis, lambda: fallback_analysis(text))
