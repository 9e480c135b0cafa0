"""Value records and boundary decoding for stored rows."""
