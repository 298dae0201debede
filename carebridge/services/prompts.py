"""Prompt templates for the Azure OpenAI backed endpoints."""

from typing import Iterable, Optional

from carebridge.models.requests import ConversationMessage, PatientInfo

SCREENING_COMPLETE_MESSAGE = "Thank you. You can now confirm your appointment."
SCREENING_START_MESSAGE = "I am ready to start."

PRESCRIPTION_DISCLAIMER = (
    "This prescription is generated for educational purposes only. "
    "Please consult with a licensed physician before taking any medication."
)

PRESCRIPTION_SYSTEM_PROMPT = """You are an experienced medical doctor assistant helping to generate a comprehensive prescription based on patient information.

IMPORTANT DISCLAIMERS:
- This is for educational/reference purposes only
- Always recommend consulting with a licensed physician
- Do not provide specific medical advice for real patients

Based on the provided patient information, generate a detailed prescription in the following format:

**PRESCRIPTION**

**Patient Information:**
- Name: [Patient Name]
- Age: [Age]
- Date: [Current Date]

**Medications:**
1. [Medication Name] [Strength]
   - Dosage: [Amount and frequency]
   - Duration: [Treatment period]
   - Instructions: [Special instructions]

**General Instructions:**
- [Lifestyle recommendations]
- [Dietary advice if applicable]
- [Follow-up recommendations]

**Warnings & Precautions:**
- [Important warnings]
- [Drug interactions to avoid]
- [When to seek immediate medical attention]

**Follow-up:**
- [Recommended follow-up timeline]
- [What to monitor]

Please ensure all recommendations are evidence-based, include proper dosages and frequencies,
consider potential drug interactions and contraindications, and emphasize the need for
professional medical consultation."""

ANALYSIS_SYSTEM_PROMPT = """You are a medical assistant analyzing patient transcripts. Based on the provided transcript, extract and organize the medical information.

Extract the following information:
1. symptoms: All symptoms mentioned by the patient
2. diagnosis: Potential diagnosis based on the symptoms described
3. notes: Important observations, medical history, and considerations"""

SUMMARY_SYSTEM_PROMPT = """You are a medical assistant that creates concise summaries of patient-doctor conversations.

Analyze the provided transcript and create a brief, professional summary that captures:
1. Main health concerns or symptoms discussed
2. Key points from the conversation
3. Any important medical information mentioned
4. Overall context of the consultation

Keep the summary concise (2-4 sentences) and focus on the most important medical information discussed."""

REPORT_SYSTEM_PROMPT = """You are a medical assistant responsible for summarizing a patient-AI conversation into a structured report for a doctor.

Generate a report with three sections, using markdown for formatting:
1.  **Patient Description**: Briefly state the patient's main complaint in one sentence.
2.  **Key Points**: Create a bulleted list summarizing the critical details from the conversation (e.g., duration of symptoms, pain description, severity, related symptoms).
3.  **Next Steps**: Confirm the appointment details and add a generic reminder for the patient.

Analyze the provided conversation and format the output exactly as requested."""


def screening_system_prompt(department: Optional[str]) -> str:
    return f"""You are an AI medical assistant conducting a pre-appointment screening.
- Your goal is to ask the user a series of 5-6 questions to understand their symptoms.
- Start by asking for the main reason for the visit, considering the selected department: {department or "General"}.
- Ask only one question at a time.
- Keep your questions concise and easy to understand.
- Based on the user's answers, ask relevant follow-up questions.
- After 5-6 questions, or when you have enough information, your final message must be "{SCREENING_COMPLETE_MESSAGE}" to signal the end.
- Do not add any extra phrases or greetings to the final message."""


def build_medical_data(
    symptoms: Optional[str],
    diagnosis: Optional[str],
    notes: Optional[str],
    patient_info: Optional[PatientInfo],
) -> str:
    """Formats the clinical input of a prescription request"""
    lines = []
    if patient_info is not None:
        lines.extend([
            "Patient Information:",
            f"- Name: {patient_info.name or 'Not provided'}",
            f"- Age: {patient_info.age or 'Not provided'}",
            f"- Gender: {patient_info.gender or 'Not provided'}",
            f"- Medical History: {patient_info.medical_history or 'Not provided'}",
            f"- Allergies: {patient_info.allergies or 'None specified'}",
            "",
        ])
    lines.extend([
        f"Symptoms: {symptoms or 'Not provided'}",
        f"Diagnosis: {diagnosis or 'Not provided'}",
        f"Additional Notes: {notes or 'Not provided'}",
    ])
    return "\n".join(lines)


def format_conversation(conversation: Iterable[ConversationMessage]) -> str:
    """Renders a screening dialogue as 'Patient:' / 'AI Assistant:' lines"""
    return "\n".join(
        f"{'Patient' if msg.role == 'user' else 'AI Assistant'}: {msg.content}"
        for msg in conversation
    )


def build_report_prompt(conversation_text: str, date: Optional[str], time: Optional[str]) -> str:
    return f"""Please generate a patient report based on the following conversation:
---
{conversation_text}
---

Appointment Details:
Date: {date or 'Not provided'}
Time: {time or 'Not provided'}"""
