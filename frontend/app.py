import datetime

import streamlit as st

from frontend.client import BACKEND_URL, GenerationFailed, download_image, generate_image

# ==========================
# Config
# ==========================
st.set_page_config(
    page_title="EverArt Image Proxy",
    page_icon="🎨",
    layout="wide"
)

st.title("🎨 EverArt Image Proxy")
st.caption("Describe an image and wait for the result")

# ==========================
# State
# ==========================
if "messages" not in st.session_state:
    st.session_state["messages"] = [{
        "role": "assistant",
        "content": "Hi! Describe the image you want. 💬",
    }]

# ==========================
# Sidebar
# ==========================
with st.sidebar:
    st.header("⚙️ Settings")

    if st.button("🗑️ Clear history"):
        st.session_state["messages"] = [{
            "role": "assistant",
            "content": "History cleared. 💬",
        }]
        st.rerun()

    num_images = len([m for m in st.session_state["messages"] if "image" in m])
    st.markdown(f"**🖼️ Images generated:** {num_images}")

    st.markdown("---")
    st.markdown("### 💡 Examples")
    st.code("a red fox in the snow, watercolor")
    st.code("isometric city at night, neon lights")

    st.markdown("---")
    st.write("🔗 Backend:", BACKEND_URL)

# ==========================
# History
# ==========================
for idx, msg in enumerate(st.session_state["messages"]):
    with st.chat_message(msg["role"]):
        st.markdown(msg["content"])

        if "image" in msg:
            col1, col2, col3 = st.columns([1, 2, 1])
            with col2:
                st.image(msg["image"], use_container_width=True)

        if msg.get("image_url"):
            st.markdown(f"🔗 [Open original]({msg['image_url']})")

        if msg.get("download_data"):
            ts = msg.get("timestamp", datetime.datetime.now().strftime("%Y%m%d_%H%M%S"))
            st.download_button(
                "⬇️ Download",
                data=msg["download_data"],
                file_name=f"everart_{ts}.png",
                mime="image/png",
                key=f"download_{idx}"
            )

# ==========================
# Prompt
# ==========================
user_prompt = st.chat_input("💭 Describe the image...")

if user_prompt:
    st.session_state["messages"].append({"role": "user", "content": user_prompt})

    with st.chat_message("assistant"):
        try:
            with st.spinner("🎨 Generating..."):
                image_url = generate_image(user_prompt)

            image, img_bytes = download_image(image_url)
            if image:
                ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
                st.session_state["messages"].append({
                    "role": "assistant",
                    "content": "✨ Here is your image!",
                    "image": image,
                    "image_url": image_url,
                    "download_data": img_bytes,
                    "timestamp": ts,
                })
            else:
                st.session_state["messages"].append({
                    "role": "assistant",
                    "content": "⚠️ Could not load the image.",
                    "image_url": image_url,
                })

        except GenerationFailed as e:
            st.session_state["messages"].append({
                "role": "assistant",
                "content": f"❌ Error ({e.status_code}): {e}",
            })
        except Exception as e:
            st.session_state["messages"].append({
                "role": "assistant",
                "content": f"❌ Error: {e}",
            })

    st.rerun()
