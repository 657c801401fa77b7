"""Authorization of document access through the external ACL service."""
