# pages/2_Revendedores.py
from services.subscriber_page import render_subscriber_page

render_subscriber_page("resellers")
