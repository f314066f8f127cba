# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""MailChimp list member sync service."""
