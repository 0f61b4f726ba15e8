# --------------------------------------------------------------
# File: 2_Ver_Paste.py
# Description: Descarga y descifra un paste a partir de su URL desde Streamlit.
# --------------------------------------------------------------

import streamlit as st

from api.services import show_paste
from api.transport import HttpTransport
from privatebin.config import DEFAULT_BIN, load_config
from privatebin.errors import AuthenticationError, PolicyError, PrivateBinError
from privatebin.keys import BURN_MARKER, split_paste_url

st.title("📥 Ver paste")

url = st.text_input("URL del paste (con el fragmento #...)")
password = st.text_input("Contraseña (si la tiene)", type="password")

confirm_burn = False
if url:
    try:
        _, _, fragment = split_paste_url(url)
    except PrivateBinError as exc:
        st.error(str(exc))
        st.stop()
    if fragment.startswith(BURN_MARKER):
        # SECURITY: la lectura consume el paste en el servidor.
        st.warning("Este paste se destruirá al leerlo.")
        confirm_burn = st.checkbox("Entiendo que solo podré leerlo una vez")

if st.button("Descifrar", disabled=not url):
    # Usa las cabeceras y credenciales de la instancia configurada si existe.
    try:
        transport = HttpTransport.from_bin(load_config().find_bin(DEFAULT_BIN))
    except PrivateBinError:
        transport = HttpTransport()

    try:
        result = show_paste(url, transport, password=password, confirm_burn=confirm_burn)
    except PolicyError as exc:
        st.warning(str(exc))
    except AuthenticationError:
        st.error("No se pudo descifrar: contraseña incorrecta o datos alterados.")
    except PrivateBinError as exc:
        st.error(f"No se pudo leer el paste: {exc}")
    else:
        paste = result.paste
        st.caption(f"ID: {result.paste_id} · formato: {result.adata.formatter}")
        if paste.data:
            st.code(paste.data.decode("utf-8"))
        if paste.attachment:
            st.download_button(
                "Descargar adjunto",
                data=paste.attachment,
                file_name=paste.attachment_name or "attachment",
                mime=paste.mime_type,
            )
        if result.comments:
            st.markdown("### Comentarios")
            for comment in result.comments:
                with st.container(border=True):
                    st.markdown(f"**{comment.nickname or 'Anónimo'}**")
                    st.write(comment.text)
