CHAT_SYSTEM_TEMPLATE = """
    You are a helpful assistant analyzing a YouTube video transcript.
    Here is the transcript:

    {transcript}

    Answer questions about this transcript accurately and helpfully.
    """

JSON_ARRAY_INSTRUCTIONS = """
    IMPORTANT: Return ONLY a valid JSON array with this exact structure:
    [
      {{"question": "question text here", "answer": "answer text here"}}
    ]
    Do not include any markdown, explanations, or text outside the JSON array.
    """

QUESTIONS_TEMPLATE = """
    Based on this YouTube video transcript, generate {count} thoughtful questions
    that test understanding of the key concepts. Each answer must be based on the transcript.
    """ + JSON_ARRAY_INSTRUCTIONS + """
    Transcript:
    {transcript}
    """

FLASHCARDS_TEMPLATE = """
    Based on this YouTube video transcript, create {count} flashcards for studying.
    """ + JSON_ARRAY_INSTRUCTIONS + """
    Transcript:
    {transcript}
    """

SUMMARY_TEMPLATE = """
    Summarize this YouTube video transcript in a {length} summary.
    Use clear paragraphs and keep the important details.

    Transcript:
    {transcript}
    """

KEY_POINTS_TEMPLATE = """
    Extract the {count} most important key points from this YouTube video transcript
    as a markdown bullet list.

    Transcript:
    {transcript}
    """

REWRITE_TEMPLATE = """
    Rewrite this YouTube video transcript as a well-structured {style} article.
    Fix grammar, remove filler words and keep the original meaning.

    Transcript:
    {transcript}
    """

TRANSLATE_TEMPLATE = """
    Translate this YouTube video transcript into {language}.
    Return only the translation.

    Transcript:
    {transcript}
    """
