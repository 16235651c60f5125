# UI styles for Word Drill. Loaded once in app.py.

APP_STYLES_HTML = """
<style>
    /* ===== Global: hide Streamlit chrome, set base font ===== */
    #MainMenu, footer {visibility: hidden;}
    .stApp {
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial,
                     'Noto Sans CJK SC', 'Microsoft YaHei', sans-serif;
        -webkit-font-smoothing: antialiased;
        font-size: 18px;
    }

    /* ===== Buttons: pill-shaped, elevated feel ===== */
    .stButton>button, .stFormSubmitButton>button {
        border-radius: 10px; font-weight: 600; width: 100%;
        min-height: 46px;
        box-shadow: 0 1px 3px rgba(0,0,0,0.08);
    }

    /* ===== Hero ===== */
    .app-hero { text-align: center; margin: 0.5rem 0 1.2rem; }
    .app-hero h1 { font-size: 2.2rem; margin-bottom: 0.2rem; }
    .app-hero p { color: #6b7280; margin: 0; }

    /* ===== Flashcard ===== */
    .card-head {
        display: flex; justify-content: space-between; align-items: baseline;
        color: #6b7280; font-size: 0.9rem; margin-bottom: 0.6rem;
    }
    .card-word {
        text-align: center; font-size: 2.4rem; font-weight: 700; color: #1f2937;
        padding: 1.6rem 0 1rem;
    }
    .card-meaning {
        text-align: center; font-size: 1.25rem; color: #374151;
        background: #f9fafb; border-radius: 10px; padding: 0.9rem 1rem; margin-bottom: 1rem;
    }
    .card-result-ok, .card-result-bad {
        text-align: center; border-radius: 10px; padding: 0.7rem 1rem; margin-bottom: 1rem; font-weight: 600;
    }
    .card-result-ok { background: #dcfce7; color: #166534; }
    .card-result-bad { background: #fee2e2; color: #991b1b; }

    /* ===== Article ===== */
    .article-body {
        line-height: 1.9; background: #ffffff; border: 1px solid #e5e7eb;
        border-radius: 12px; padding: 1rem 1.2rem;
    }
    .article-body mark.word-hit {
        background: #dbeafe; color: #1e3a8a; border-radius: 4px; padding: 0 2px;
    }
    .article-body mark.word-hit.active {
        background: #fde68a; color: #78350f;
    }
    .article-translation {
        line-height: 1.9; background: #f9fafb; border-radius: 12px; padding: 1rem 1.2rem;
        white-space: pre-wrap;
    }
</style>
"""
