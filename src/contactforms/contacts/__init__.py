from contactforms.contacts.models import ContactSource, Website

__all__ = ["ContactSource", "Website"]
