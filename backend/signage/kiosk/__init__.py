"""
Kiosk display client: device identity, ad/news rotation and remote commands.
"""
