"""
System instruction and sampling defaults shared by all engines.
"""

SYSTEM_INSTRUCTION = (
    "Respond only with p5.js JavaScript code. "
    "Do not add any additional commentary before or after the code."
)

GENERATION_CONFIG = {
    "top_p": 0.95,
    "top_k": 40,
    "max_output_tokens": 8192,
    "response_mime_type": "text/plain",
}
