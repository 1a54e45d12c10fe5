from dotenv import load_dotenv
import os
# Always use the absolute path to your .env in the current project directory
load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"))
import logging
import streamlit as st

from polypath.controller import FlashcardController
from polypath.monitoring import configure_logging

configure_logging()
logger = logging.getLogger("polypath.ui")

LANGUAGES = {
    "": "Select a language",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "nl": "Dutch",
    "pl": "Polish",
    "ru": "Russian",
    "tr": "Turkish",
    "ar": "Arabic",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
}
CARDS_PER_ROW = 3
CARD_REPAINT_SECONDS = 0.5


def _controller() -> FlashcardController:
    if 'controller' not in st.session_state:
        logger.info("[UI] Creating flashcard controller")
        st.session_state['controller'] = FlashcardController()
    return st.session_state['controller']


def _sync_form():
    ctl = _controller()
    ctl.native_lang = st.session_state.get('native_lang', '')
    ctl.target_lang = st.session_state.get('target_lang', '')
    ctl.theme = st.session_state.get('theme_input', '')
    ctl.validate_form()


def _swap():
    ctl = _controller()
    ctl.swap_languages()
    st.session_state['native_lang'] = ctl.native_lang
    st.session_state['target_lang'] = ctl.target_lang


def _generate():
    _sync_form()
    with st.spinner("Generating words..."):
        _controller().fetch_words()


def render_form(ctl: FlashcardController) -> None:
    c1, c2, c3 = st.columns([4, 1, 4])
    with c1:
        st.selectbox("I speak", options=list(LANGUAGES), format_func=LANGUAGES.get,
                     key='native_lang', on_change=_sync_form)
    with c2:
        st.write("")
        st.button("⇄", key='swap_languages', on_click=_swap, help="Swap languages")
    with c3:
        st.selectbox("I'm learning", options=list(LANGUAGES), format_func=LANGUAGES.get,
                     key='target_lang', on_change=_sync_form)

    # Enter in the theme field submits the form, same as clicking Generate
    with st.form('theme_form', border=False):
        st.text_input("Theme (optional)", key='theme_input',
                      placeholder="e.g. food, travel, sports")
        st.form_submit_button("Generate Words", on_click=_generate,
                              disabled=not ctl.can_generate, type="primary")

    if ctl.error:
        st.error(ctl.error)

    if ctl.cards:
        st.button("Regenerate", key='regenerate_btn', on_click=_generate,
                  disabled=not ctl.can_generate)


@st.fragment(run_every=CARD_REPAINT_SECONDS)
def _watch_card_reverts():
    # Timed reverts happen off the script thread; repaint once they land
    if _controller().needs_repaint(st.session_state.get('rendered_labels')):
        st.rerun()


def render_cards(ctl: FlashcardController) -> None:
    if not ctl.cards:
        st.session_state['rendered_labels'] = []
        return
    st.subheader("Your words")
    st.caption("Click a word to see its translation.")
    for start in range(0, len(ctl.cards), CARDS_PER_ROW):
        row = ctl.cards[start:start + CARDS_PER_ROW]
        cols = st.columns(CARDS_PER_ROW)
        for offset, card in enumerate(row):
            with cols[offset]:
                st.button(card.label, key=f"word_btn_{start + offset}", on_click=card.toggle,
                          help=card.aria_label, use_container_width=True,
                          type="secondary" if card.flipped else "primary")
    st.session_state['rendered_labels'] = ctl.card_labels()
    if ctl.revert_pending:
        _watch_card_reverts()


def main():
    st.set_page_config(page_title="Polypath", page_icon="🃏", layout="centered")
    st.title("Polypath")
    st.write("Pick two languages and a theme to get a fresh set of flashcards.")
    ctl = _controller()
    render_form(ctl)
    render_cards(ctl)


main()
