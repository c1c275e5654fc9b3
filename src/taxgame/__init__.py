"""Static page generator and tax engine for the tax-as-a-game visualization."""
