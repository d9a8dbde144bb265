from datetime import datetime
from uuid import uuid4

SHIPMENT_PREFIX = "SHP"
PICKUP_PREFIX = "PUR"
PURCHASE_PREFIX = "ACH"


def next_document_number(prefix: str) -> str:
    """
    Formatted document number: PREFIX-YYYY-XXXXXXXX.

    The suffix is random rather than sequenced so creation never has to lock
    a counter row; the unique index on the number column is the backstop.
    """
    return f"{prefix}-{datetime.now().year}-{uuid4().hex[:8].upper()}"
