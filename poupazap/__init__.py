"""PoupaZap personal-finance assistant: intent extraction and dialogue flow."""
