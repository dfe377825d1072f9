# Bundler engines
"""
Engine modules selectable through DEVTOOL_ENGINE:
- rollup: Node.js rollup API driven through a bridge process (default)
"""
