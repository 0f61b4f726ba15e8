# --------------------------------------------------------------
# File: 1_Crear_Paste.py
# Description: Cifra y publica un paste (texto y/o adjunto) desde Streamlit.
# --------------------------------------------------------------

import streamlit as st

from api.services import create_paste
from api.transport import HttpTransport
from privatebin.config import DEFAULT_BIN, load_config
from privatebin.errors import PrivateBinError
from privatebin.models import Paste

EXPIRE_CHOICES = ["5min", "10min", "1hour", "1day", "1week", "1month", "1year", "never"]
FORMATTERS = ["plaintext", "markdown", "syntaxhighlighting"]

st.title("📝 Crear paste")

# Carga la instancia configurada; sin ella no hay endpoint al que publicar.
try:
    bin_cfg = load_config().find_bin(DEFAULT_BIN)
except PrivateBinError as exc:
    st.error(f"Configuración no disponible: {exc}")
    st.stop()

st.caption(f"Instancia: `{bin_cfg.name}` → {bin_cfg.host}")

text = st.text_area("Texto", height=200)
upload = st.file_uploader("Adjunto (opcional)", type=None)

col1, col2 = st.columns(2)
with col1:
    expire = st.selectbox(
        "Caducidad",
        EXPIRE_CHOICES,
        index=EXPIRE_CHOICES.index(bin_cfg.expire) if bin_cfg.expire in EXPIRE_CHOICES else 3,
    )
    formatter = st.selectbox(
        "Formato",
        FORMATTERS,
        index=FORMATTERS.index(bin_cfg.formatter) if bin_cfg.formatter in FORMATTERS else 0,
    )
with col2:
    burn = st.checkbox("Destruir tras la lectura", value=bin_cfg.burn_after_reading)
    discussion = st.checkbox("Abrir discusión", value=bin_cfg.open_discussion)
    gzip = st.checkbox("Comprimir", value=bin_cfg.gzip)
password = st.text_input("Contraseña (opcional)", type="password")

if st.button("Cifrar y publicar", disabled=not text and upload is None):
    paste = Paste(
        data=text.encode("utf-8"),
        attachment=upload.read() if upload is not None else b"",
        attachment_name=upload.name if upload is not None else "",
        mime_type=(upload.type or "") if upload is not None else "",
    )
    options = bin_cfg.paste_options(password).model_copy(
        update={
            "expire": expire,
            "formatter": formatter,
            "burn_after_reading": burn,
            "open_discussion": discussion,
            "compress": gzip,
        }
    )
    try:
        result = create_paste(bin_cfg.host, paste, options, HttpTransport.from_bin(bin_cfg))
    except PrivateBinError as exc:
        st.error(f"No se pudo crear el paste: {exc}")
    else:
        st.success("Paste publicado.")
        st.code(result.url)
        st.caption(f"ID: {result.paste_id} · token de borrado: {result.delete_token}")
