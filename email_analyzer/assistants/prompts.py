EXTRACTION_PROMPT = """
    Extract the sender's contact details and intent from the email below.

    Email:
    ---
    {email_body}
    ---

    Rules:
    - Respond with ONLY a JSON object, no commentary or code fences.
    - Use exactly these keys: "email", "phone", "name", "intent".
    - Use null for any value that does not appear in the email.
    - "intent" is a short phrase describing what the sender wants.
""".strip()


def build_message(email_body: str, response_mode: str) -> str:
    if response_mode == "structured":
        return EXTRACTION_PROMPT.format(email_body=email_body)
    return email_body
