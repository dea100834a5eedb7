"""Views: result sets derived from other result sets."""

from resultfmt.view.crosstab import CrosstabView, new_crosstab_view

__all__ = ["CrosstabView", "new_crosstab_view"]
