# --------------------------------------------------------------
# File: Home.py
# Description: Define la página principal de Streamlit con el resumen del flujo.
# --------------------------------------------------------------

import streamlit as st

# Configura los metadatos de la página principal de la aplicación.
st.set_page_config(page_title="PrivateBin", page_icon="🔐", layout="centered")

# Presenta el nombre del producto y su propósito general.
st.title("🔐 PrivateBin")
st.write(
    "Cliente cifrado extremo a extremo: el texto y los adjuntos se cifran con "
    "AES-GCM en tu equipo y la clave viaja solo en el fragmento de la URL."
)
st.info("Usa **Crear paste** para publicar y **Ver paste** para descifrar una URL.")
