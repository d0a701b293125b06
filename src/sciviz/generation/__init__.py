"""Request composition, prompt contract, and the Gemini client."""
