"""Constants for vformat parsing library."""

# Related to rfc5545 and rfc6350 text parsing
FOLD_LEN = 75
FOLD_INDENT = " "
WSP = (" ", "\t")
CRLF = "\r\n"
BOM = "\ufeff"
ATTR_BEGIN = "BEGIN"
ATTR_END = "END"
ATTR_TYPE = "TYPE"
