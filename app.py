"""
Word Drill (只背单词) – Streamlit entry point.
UI and session-state wiring; logic lives in wordlist, session, article,
retry, report, rate_limiter, state, config and errors.
"""
import html
import logging

import streamlit as st

import constants
from article import generate_article, render_article_html
from config import get_config, missing_config_keys
from errors import ErrorHandler, SessionStateError, ValidationError, VocabError
from rate_limiter import check_article_limit, record_article
from report import miss_counts, round_history_frame
from session import LearningSession, Phase
from state import clear_all_state, get_learning_session, init_state, reset_modes, set_word_list
from ui_styles import APP_STYLES_HTML
from wordlist import load_word_file, parse_word_list

logger = logging.getLogger(__name__)

# ==========================================
# Page Configuration
# ==========================================
st.set_page_config(
    page_title=f"{constants.APP_TITLE} · Word Drill",
    page_icon="📚",
    layout="centered",
    initial_sidebar_state="collapsed"
)

# Logging: ensure root logger has a handler when running as main app
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

init_state()
st.markdown(APP_STYLES_HTML, unsafe_allow_html=True)

_MODE_TITLES = {
    constants.MODE_MEMORIZE: "速记单词",
    constants.MODE_PRACTICE: "刷单词",
}


# ==========================================
# Callbacks (run before the next script rerun)
# ==========================================

def _run_transition(mode: str, action: str, *args) -> None:
    session = get_learning_session(mode)
    try:
        getattr(session, action)(*args)
    except SessionStateError as e:
        # stale button from a previous render, e.g. a double click
        logger.warning("Ignored %s.%s: %s", mode, action, e)


def _submit_answer(mode: str, input_key: str) -> None:
    _run_transition(mode, "reveal", st.session_state.get(input_key, ""))


def _toggle_highlight(word: str) -> None:
    current = st.session_state.get('highlighted_word')
    st.session_state['highlighted_word'] = None if current == word else word


def _reset_article() -> None:
    st.session_state['article_result'] = None
    st.session_state['article_error'] = ""
    st.session_state['highlighted_word'] = None


# ==========================================
# Upload
# ==========================================

def _render_upload_tab() -> None:
    words = st.session_state['words']
    if words:
        st.success(f"✅ 已成功导入 {len(words)} 个单词（{st.session_state['word_source_name'] or '粘贴文本'}），请选择学习模式开始学习。")
        with st.expander("查看词表", expanded=False):
            st.dataframe(
                [{"单词": w.word, "释义": w.meaning} for w in words],
                use_container_width=True,
                hide_index=True,
            )
        st.button("🗑️ 清空词表", on_click=clear_all_state, key="btn_clear_words")
        st.divider()

    sub_upload, sub_paste = st.tabs(["上传文件", "粘贴文本"])
    with sub_upload:
        uploaded_file = st.file_uploader(
            "点击或拖拽上传 txt 文件",
            type=["txt"],
            help="文件格式：单词 释义（每行一个），例如：apple n.苹果",
            key="word_file",
        )
        if st.button("📁 导入词表", type="primary", key="btn_import_file"):
            if uploaded_file is None:
                st.warning("⚠️ 请先上传文件。")
            else:
                try:
                    loaded = load_word_file(uploaded_file.name, uploaded_file.getvalue())
                except ValidationError as e:
                    ErrorHandler.handle_expected(e)
                except Exception as e:
                    ErrorHandler.handle(e, "读取文件失败")
                else:
                    set_word_list(loaded, uploaded_file.name)
                    st.rerun()

    with sub_paste:
        pasted = st.text_area(
            "✍️ 粘贴词表",
            height=220,
            key="paste_words",
            placeholder="apple n. 苹果\nrun v. 跑",
        )
        if st.button("🧾 解析词表", type="primary", key="btn_import_paste"):
            if len(pasted) > constants.MAX_PASTE_TEXT_LENGTH:
                st.error(f"❌ 文本过长（上限 {constants.MAX_PASTE_TEXT_LENGTH} 字符）。")
            else:
                parsed = parse_word_list(pasted)
                if not parsed:
                    st.warning("⚠️ 未识别到任何单词，请检查格式：单词 释义（每行一个）。")
                else:
                    set_word_list(parsed, "")
                    st.rerun()


# ==========================================
# Memorize / practice
# ==========================================

def _render_session_setup(mode: str, session: LearningSession) -> None:
    words = st.session_state['words']
    size_key = f"{mode}_size"
    size = st.number_input(
        "单词数量",
        min_value=1,
        max_value=max(len(words), 1),
        value=min(st.session_state[size_key], max(len(words), 1)),
        step=1,
        key=f"{size_key}_input",
        help=f"可用单词数量：{len(words)}，可输入 1-{len(words)} 之间的数字",
    )
    if st.button("开始学习", type="primary", key=f"btn_start_{mode}"):
        st.session_state[size_key] = int(size)
        try:
            session.start(int(size), words)
        except ValidationError as e:
            ErrorHandler.handle_expected(e)
        else:
            st.rerun()


def _render_session_completed(mode: str, session: LearningSession) -> None:
    st.success("🎉 学习完成！恭喜您完成了所有单词的学习！")
    col_a, col_b = st.columns(2)
    with col_a:
        st.metric("复习轮数", session.round_number)
    with col_b:
        st.metric("累计错词次数", sum(len(r) for r in session.round_history))

    if session.round_history:
        with st.expander("📋 错词统计", expanded=True):
            st.dataframe(miss_counts(session), use_container_width=True, hide_index=True)
        with st.expander("各轮复习记录", expanded=False):
            st.dataframe(round_history_frame(session), use_container_width=True, hide_index=True)

    st.button("重新学习", type="primary", key=f"btn_again_{mode}", on_click=session.reset)


def _render_memorize_card(mode: str, session: LearningSession) -> None:
    word = session.current_word
    st.markdown(f'<div class="card-word">{html.escape(word.word)}</div>', unsafe_allow_html=True)

    if session.phase == Phase.PROMPT:
        col_l, col_r = st.columns(2)
        with col_l:
            st.button("✅ 认识", key=f"btn_know_{mode}", on_click=_run_transition, args=(mode, "reveal", True))
        with col_r:
            st.button("❌ 不认识", key=f"btn_unknown_{mode}", on_click=_run_transition, args=(mode, "reveal", False))
        return

    st.markdown(f'<div class="card-meaning">{html.escape(word.meaning)}</div>', unsafe_allow_html=True)
    col_l, col_r = st.columns(2)
    with col_l:
        st.button("继续", type="primary", key=f"btn_next_{mode}", on_click=_run_transition, args=(mode, "advance"))
    with col_r:
        st.button("📖 熟记", key=f"btn_mastered_{mode}", on_click=_run_transition, args=(mode, "mark_mastered"))


def _render_practice_card(mode: str, session: LearningSession) -> None:
    word = session.current_word
    st.markdown(f'<div class="card-meaning">{html.escape(word.meaning)}</div>', unsafe_allow_html=True)

    if session.phase == Phase.PROMPT:
        input_key = f"answer_{mode}_{session.round_number}_{session.cursor}"
        with st.form(f"form_{mode}", clear_on_submit=True, border=False):
            st.text_input("请输入英文单词", key=input_key, placeholder="请输入英文单词")
            st.form_submit_button("完成", type="primary", on_click=_submit_answer, args=(mode, input_key))
        return

    if session.last_correct:
        st.markdown('<div class="card-result-ok">正确！</div>', unsafe_allow_html=True)
    else:
        st.markdown(
            f'<div class="card-result-bad">错误！正确答案是：{html.escape(word.word)}</div>',
            unsafe_allow_html=True,
        )
    col_l, col_r = st.columns(2)
    with col_l:
        st.button("下一个", type="primary", key=f"btn_next_{mode}", on_click=_run_transition, args=(mode, "advance"))
    with col_r:
        st.button("📖 熟记", key=f"btn_mastered_{mode}", on_click=_run_transition, args=(mode, "mark_mastered"))


def _render_session_tab(mode: str) -> None:
    if not st.session_state['words']:
        st.info("📭 请先在「上传词表」中导入单词。")
        return

    session = get_learning_session(mode)
    if session.phase == Phase.NOT_STARTED:
        _render_session_setup(mode, session)
        return
    if session.phase == Phase.COMPLETED:
        _render_session_completed(mode, session)
        return

    title = _MODE_TITLES[mode] if not session.is_review_round else f"第{session.round_number}轮复习"
    st.markdown(
        f'<div class="card-head"><strong>{title}</strong>'
        f'<span>{session.position} / {session.pool_size}</span></div>',
        unsafe_allow_html=True,
    )
    st.progress(session.position / session.pool_size)

    if mode == constants.MODE_MEMORIZE:
        _render_memorize_card(mode, session)
    else:
        _render_practice_card(mode, session)

    st.divider()
    st.button("🔄 重新开始", key=f"btn_reset_{mode}", on_click=session.reset)


# ==========================================
# Article
# ==========================================

def _do_generate_article(count: int) -> None:
    allowed, msg = check_article_limit()
    if not allowed:
        st.session_state['article_error'] = msg
        return
    record_article()

    _reset_article()
    with st.spinner("⏳ 正在生成文章..."):
        try:
            st.session_state['article_result'] = generate_article(st.session_state['words'], count)
        except VocabError as e:
            st.session_state['article_error'] = f"生成文章失败：{e}"
            logger.warning("Article generation failed: %s", e)
        except Exception as e:
            ErrorHandler.handle(e, "生成文章失败")
            st.session_state['article_error'] = "生成文章失败，请重试"


def _render_article_tab() -> None:
    words = st.session_state['words']
    if not words:
        st.info("📭 请先在「上传词表」中导入单词。")
        return

    missing = missing_config_keys(get_config())
    if missing:
        st.error(f"❌ AI 接口配置缺失：{', '.join(missing)}。请在 secrets 或环境变量中设置后刷新页面。")
        return

    result = st.session_state['article_result']
    if result is None:
        size = st.number_input(
            "单词数量",
            min_value=1,
            max_value=max(len(words), 1),
            value=min(st.session_state['article_size'], max(len(words), 1)),
            step=1,
            key="article_size_input",
            help=f"可用单词数量：{len(words)}",
        )
        if st.button("📝 生成文章", type="primary", key="btn_gen_article"):
            st.session_state['article_size'] = int(size)
            _do_generate_article(int(size))
            st.rerun()
        if st.session_state['article_error']:
            st.error(f"❌ {st.session_state['article_error']}")
            st.caption("可调整单词数量后点击「生成文章」重试。")
        return

    active = st.session_state.get('highlighted_word')
    st.markdown("#### 英文文章")
    st.markdown(
        f'<div class="article-body">{render_article_html(result.article, result.words, active)}</div>',
        unsafe_allow_html=True,
    )

    st.caption("点击单词高亮其在文章中的位置：")
    cols = st.columns(4)
    for i, w in enumerate(result.words):
        with cols[i % 4]:
            st.button(
                w.word,
                key=f"hl_{i}_{w.word}",
                type="primary" if active == w.word else "secondary",
                help=w.meaning,
                on_click=_toggle_highlight,
                args=(w.word,),
            )

    st.markdown("#### 中文翻译")
    st.markdown(f'<div class="article-translation">{html.escape(result.translation)}</div>', unsafe_allow_html=True)

    col_l, col_r = st.columns(2)
    with col_l:
        if st.button("🔄 重新生成", type="primary", key="btn_regen_article"):
            _do_generate_article(int(st.session_state['article_size']))
            st.rerun()
    with col_r:
        st.button("返回", key="btn_article_back", on_click=_reset_article)


# ==========================================
# Layout
# ==========================================

st.markdown(f"""
<div class="app-hero">
    <h1>{constants.APP_TITLE}</h1>
    <p>{constants.APP_SUBTITLE}</p>
</div>
""", unsafe_allow_html=True)

tab_upload, tab_memorize, tab_practice, tab_article = st.tabs([
    "📁 上传词表", "🧠 速记单词", "⌨️ 刷单词", "📝 生成文章",
])

with tab_upload:
    _render_upload_tab()

with tab_memorize:
    _render_session_tab(constants.MODE_MEMORIZE)

with tab_practice:
    _render_session_tab(constants.MODE_PRACTICE)

with tab_article:
    _render_article_tab()

if st.session_state['words']:
    st.button("🧹 重置所有学习进度", key="btn_reset_all", on_click=reset_modes)
