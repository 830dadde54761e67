# pages/1_Clientes.py
from services.subscriber_page import render_subscriber_page

render_subscriber_page("clients")
