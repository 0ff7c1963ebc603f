"""Network-free quiz content used when the document or the model cannot be trusted"""
from quizgen.schemas import Question

SAMPLE_CONTENT = """Chapter 1: Introduction to Machine Learning

Machine learning is a subset of artificial intelligence (AI) that provides systems the ability to automatically learn and improve from experience without being explicitly programmed. Unlike traditional programming where rules are explicitly coded, machine learning algorithms build models based on training data.

Key Characteristics of Machine Learning:
- Learns from data without being explicitly programmed for every scenario
- Improves performance over time as more data becomes available
- Makes predictions or decisions based on patterns in data
- Can handle complex tasks that would be difficult to program manually

Types of Machine Learning:

Supervised Learning uses labeled training data. Each example in the training set includes both the input data and the desired output. Common applications include image classification, email spam detection, and medical diagnosis where the algorithm learns to categorize new, unseen data.

Unsupervised Learning finds hidden patterns in data without labeled examples. The algorithm explores the data to find structure or relationships. Clustering customer data based on purchasing behavior and dimensionality reduction are typical examples.

Reinforcement Learning learns through interaction with an environment, receiving rewards or penalties for actions taken. This approach is commonly used in game playing AI, robotics, and autonomous vehicle navigation.

Deep Learning and Neural Networks:

Neural networks are computing systems inspired by the structure of biological neural networks. They consist of interconnected nodes called artificial neurons that process information by taking inputs, applying weights and biases, and producing outputs.

Deep learning is a subset of machine learning that uses neural networks with multiple hidden layers. These deep networks can learn complex patterns and representations from large amounts of data, making them particularly effective for tasks like image recognition, natural language processing, and speech recognition.

Real-world Applications:

Healthcare: Machine learning helps analyze medical images to detect diseases like cancer, predict patient outcomes, and personalize treatment plans.

Finance: Algorithmic trading systems use machine learning to analyze market trends and make trading decisions, while fraud detection systems identify suspicious transactions.

Technology: Recommendation systems on streaming platforms and e-commerce sites use machine learning to suggest content and products based on user preferences and behavior.

Transportation: Self-driving cars use machine learning to interpret sensor data, recognize objects, and make driving decisions.

The field continues to advance rapidly, with new techniques and applications being developed regularly. Success in machine learning often depends on having high-quality data, appropriate algorithm selection, and proper model evaluation."""

FALLBACK_POOL = (
    Question(
        question="What is the capital of France?",
        options=["London", "Berlin", "Paris", "Madrid"],
        answer="C",
    ),
    Question(
        question="Which planet is known as the Red Planet?",
        options=["Mars", "Jupiter", "Venus", "Mercury"],
        answer="A",
    ),
    Question(
        question="Who wrote 'To Kill a Mockingbird'?",
        options=["Harper Lee", "Ernest Hemingway", "F. Scott Fitzgerald", "John Steinbeck"],
        answer="A",
    ),
    Question(
        question="What is the largest ocean on Earth?",
        options=["Atlantic Ocean", "Indian Ocean", "Arctic Ocean", "Pacific Ocean"],
        answer="D",
    ),
    Question(
        question="Which type of machine learning learns from labeled training data?",
        options=[
            "Unsupervised learning",
            "Supervised learning",
            "Reinforcement learning",
            "Dimensionality reduction",
        ],
        answer="B",
        explanation="Supervised learning pairs every training example with its desired output.",
    ),
    Question(
        question="How does a reinforcement learning agent improve its behaviour?",
        options=[
            "By clustering unlabeled data",
            "By memorising a labeled dataset",
            "By receiving rewards or penalties for its actions",
            "By reducing the number of input features",
        ],
        answer="C",
    ),
    Question(
        question="What distinguishes deep learning from other machine learning approaches?",
        options=[
            "It never needs training data",
            "It uses neural networks with multiple hidden layers",
            "It only works on tabular data",
            "It relies on hand-written rules",
        ],
        answer="B",
    ),
    Question(
        question="Grouping customers by purchasing behaviour is an example of which technique?",
        options=["Regression", "Classification", "Clustering", "Reinforcement"],
        answer="C",
    ),
)


def placeholder_question(number: int) -> Question:
    return Question(
        question=f"Question {number}",
        options=["Option A", "Option B", "Option C", "Option D"],
        answer="A",
    )


def fallback_questions(count: int) -> list[Question]:
    """Return exactly `count` questions: the pool first, then numbered placeholders"""
    count = max(count, 1)
    questions = list(FALLBACK_POOL[:count])
    for number in range(len(questions) + 1, count + 1):
        questions.append(placeholder_question(number))
    return questions
